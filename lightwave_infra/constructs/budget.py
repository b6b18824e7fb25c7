"""
Budget Construct for LightWave Infrastructure
Declares the monthly cost budget and its threshold notifications
"""
from typing import Callable, List, Optional
from aws_cdk import (
    aws_budgets as budgets,
)
from constructs import Construct

from ..settings import BudgetAlertRule, BudgetSettings, CostTypes


# AWS Budgets accepts at most 10 email subscribers per notification
MAX_EMAIL_SUBSCRIBERS = 10


class BudgetConstruct(Construct):
    """Construct for the monthly AWS cost budget"""

    def __init__(self, scope: Construct, construct_id: str,
                 settings: BudgetSettings,
                 channel_resolver: Optional[Callable[[str], str]] = None,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings
        self.environment_name = settings.environment_name
        self.channel_resolver = channel_resolver

        self.budget = budgets.CfnBudget(
            self, "MonthlyBudget",
            budget=budgets.CfnBudget.BudgetDataProperty(
                budget_name=settings.budget_name,
                budget_type="COST",
                time_unit="MONTHLY",
                budget_limit=budgets.CfnBudget.SpendProperty(
                    amount=settings.monthly_budget_limit,
                    unit="USD"
                ),
                cost_types=self._build_cost_types(settings.cost_types)
            ),
            notifications_with_subscribers=[
                self._build_notification(rule)
                for rule in settings.notification_thresholds
            ],
            resource_tags=[
                budgets.CfnBudget.ResourceTagProperty(key=key, value=value)
                for key, value in sorted(settings.tags.items())
            ]
        )

    @staticmethod
    def _build_cost_types(cost_types: CostTypes) -> budgets.CfnBudget.CostTypesProperty:
        return budgets.CfnBudget.CostTypesProperty(
            include_credit=cost_types.include_credit,
            include_discount=cost_types.include_discount,
            include_other_subscription=cost_types.include_other_subscription,
            include_recurring=cost_types.include_recurring,
            include_refund=cost_types.include_refund,
            include_subscription=cost_types.include_subscription,
            include_support=cost_types.include_support,
            include_tax=cost_types.include_tax,
            include_upfront=cost_types.include_upfront,
            use_amortized=cost_types.use_amortized,
            use_blended=cost_types.use_blended
        )

    def _build_notification(self, rule: BudgetAlertRule) -> budgets.CfnBudget.NotificationWithSubscribersProperty:
        """Translate one alert rule into a notification with its subscribers"""
        if len(rule.email_addresses) > MAX_EMAIL_SUBSCRIBERS:
            raise ValueError(
                f"{rule.threshold_percentage}% alert rule has {len(rule.email_addresses)} "
                f"email subscribers; AWS Budgets allows {MAX_EMAIL_SUBSCRIBERS}"
            )

        subscribers: List[budgets.CfnBudget.SubscriberProperty] = [
            budgets.CfnBudget.SubscriberProperty(address=address, subscription_type="EMAIL")
            for address in rule.email_addresses
        ]

        if rule.channel is not None:
            if self.channel_resolver is None:
                raise ValueError(
                    f"{rule.threshold_percentage}% alert rule references channel "
                    f"'{rule.channel}' but no notification channels are configured"
                )
            subscribers.append(
                budgets.CfnBudget.SubscriberProperty(
                    address=self.channel_resolver(rule.channel),
                    subscription_type="SNS"
                )
            )

        return budgets.CfnBudget.NotificationWithSubscribersProperty(
            notification=budgets.CfnBudget.NotificationProperty(
                comparison_operator="GREATER_THAN",
                notification_type=rule.threshold_type.value,
                threshold=rule.threshold_percentage,
                threshold_type="PERCENTAGE"
            ),
            subscribers=subscribers
        )
