"""
Budget Settings for LightWave Infrastructure
Declares the monthly budget, alert rules, cost types and tags per environment
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

OPS_EMAIL = "ops@lightwave-media.ltd"
FINANCE_EMAIL = "finance@lightwave-media.ltd"

BUDGET_ALERTS_CHANNEL = "budget_alerts"


class ThresholdType(str, Enum):
    """Spend the threshold is compared against"""
    ACTUAL = "ACTUAL"
    FORECASTED = "FORECASTED"


def _validate_email_addresses(addresses: Tuple[str, ...], owner: str) -> None:
    if not addresses:
        raise ValueError(f"{owner} requires at least one email address")
    for address in addresses:
        if not EMAIL_PATTERN.match(address):
            raise ValueError(f"{owner} has an invalid email address: {address!r}")


@dataclass(frozen=True)
class BudgetAlertRule:
    """A single budget notification and its recipients"""
    threshold_percentage: float
    threshold_type: ThresholdType
    email_addresses: Tuple[str, ...]
    channel: Optional[str] = None

    def __post_init__(self):
        if self.threshold_percentage < 0:
            raise ValueError(
                f"Threshold percentage must not be negative: {self.threshold_percentage}"
            )
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "email_addresses", tuple(self.email_addresses))
        object.__setattr__(self, "threshold_type", ThresholdType(self.threshold_type))
        _validate_email_addresses(
            self.email_addresses, f"{self.threshold_percentage}% alert rule"
        )


@dataclass(frozen=True)
class CostTypes:
    """Cost categories included in the budget, passed through to AWS Budgets"""
    include_credit: bool = False
    include_discount: bool = True
    include_recurring: bool = True
    include_refund: bool = False
    include_subscription: bool = True
    include_support: bool = True
    include_tax: bool = True
    include_upfront: bool = True
    include_other_subscription: bool = True
    use_amortized: bool = False
    use_blended: bool = False


@dataclass(frozen=True)
class BudgetSettings:
    """Complete set of inputs for one environment's monthly cost budget"""
    environment_name: str
    monthly_budget_limit: float
    alert_email_addresses: Tuple[str, ...]
    notification_thresholds: Tuple[BudgetAlertRule, ...]
    cost_types: CostTypes = field(default_factory=CostTypes)
    tags: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.monthly_budget_limit <= 0:
            raise ValueError(
                f"Monthly budget limit must be positive: {self.monthly_budget_limit}"
            )
        object.__setattr__(self, "alert_email_addresses", tuple(self.alert_email_addresses))
        object.__setattr__(self, "notification_thresholds", tuple(self.notification_thresholds))
        _validate_email_addresses(self.alert_email_addresses, "Budget alerts")

    @property
    def budget_name(self) -> str:
        return f"lightwave-{self.environment_name}-monthly"

    def threshold_amount(self, rule: BudgetAlertRule) -> float:
        """Spend in USD at which the rule fires"""
        return self.monthly_budget_limit * rule.threshold_percentage / 100


# Monthly limits in USD, matching the per-environment budgets used in cost reports
ENVIRONMENT_BUDGET_LIMITS: Dict[str, float] = {
    "prod": 500,
    "staging": 100,
    "dev": 50,
}


def _get_default_thresholds() -> Tuple[BudgetAlertRule, ...]:
    """Alert ladder shared by all environments"""
    return (
        BudgetAlertRule(70, ThresholdType.ACTUAL, (OPS_EMAIL,)),
        BudgetAlertRule(85, ThresholdType.ACTUAL, (OPS_EMAIL, FINANCE_EMAIL)),
        BudgetAlertRule(
            100, ThresholdType.ACTUAL, (OPS_EMAIL, FINANCE_EMAIL),
            channel=BUDGET_ALERTS_CHANNEL
        ),
        # Forecast above the limit warns before the overage actually happens
        BudgetAlertRule(
            110, ThresholdType.FORECASTED, (OPS_EMAIL, FINANCE_EMAIL),
            channel=BUDGET_ALERTS_CHANNEL
        ),
    )


def _get_default_tags(environment_name: str) -> Dict[str, str]:
    return {
        "Project": "lightwave",
        "Owner": OPS_EMAIL,
        "CostCenter": "platform",
        "Environment": environment_name,
        "ManagedBy": "cdk",
    }


def get_budget_settings(environment_name: str = "prod",
                        additional_tags: Optional[Dict[str, str]] = None) -> BudgetSettings:
    """Build the budget settings for a known environment"""
    if environment_name not in ENVIRONMENT_BUDGET_LIMITS:
        known = ", ".join(sorted(ENVIRONMENT_BUDGET_LIMITS))
        raise ValueError(f"Unknown environment '{environment_name}' (known: {known})")

    tags = _get_default_tags(environment_name)
    if additional_tags:
        tags.update(additional_tags)

    return BudgetSettings(
        environment_name=environment_name,
        monthly_budget_limit=ENVIRONMENT_BUDGET_LIMITS[environment_name],
        alert_email_addresses=(OPS_EMAIL,),
        notification_thresholds=_get_default_thresholds(),
        cost_types=CostTypes(),
        tags=tags,
    )
