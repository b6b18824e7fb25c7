"""
Configuration Management Construct for LightWave Infrastructure
Publishes the budget inputs to SSM Parameter Store for reporting tools
"""
import json
from typing import Dict
from aws_cdk import (
    aws_ssm as ssm,
)
from constructs import Construct

from ..settings import BudgetSettings


class ConfigurationConstruct(Construct):
    """Construct for exposing budget configuration via SSM Parameter Store"""

    def __init__(self, scope: Construct, construct_id: str,
                 settings: BudgetSettings, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.environment_name = settings.environment_name
        self.parameters: Dict[str, ssm.StringParameter] = {}

        for key, config in self._get_budget_config(settings).items():
            self.parameters[f"budget_{key}"] = self._create_standard_parameter(
                category="budget",
                key=key,
                value=config["value"],
                description=config["description"]
            )

    def _get_parameter_name(self, category: str, key: str) -> str:
        """Generate standardized parameter name"""
        return f"/lightwave/{self.environment_name}/{category}/{key}"

    def _create_standard_parameter(self, category: str, key: str, value: str,
                                   description: str) -> ssm.StringParameter:
        """Create a standard string parameter"""
        construct_key = "".join(part.title() for part in key.split("_"))
        return ssm.StringParameter(
            self, f"{category.title()}{construct_key}Parameter",
            parameter_name=self._get_parameter_name(category, key),
            string_value=value,
            description=description,
            tier=ssm.ParameterTier.STANDARD
        )

    def _get_budget_config(self, settings: BudgetSettings) -> Dict[str, Dict[str, str]]:
        """Budget values shared with the cost report scripts"""
        return {
            "monthly_limit_usd": {
                "value": json.dumps(settings.monthly_budget_limit),
                "description": "Monthly cost budget limit in USD"
            },
            "alert_thresholds_percent": {
                "value": json.dumps([
                    rule.threshold_percentage for rule in settings.notification_thresholds
                ]),
                "description": "Budget alert threshold percentages, in notification order"
            },
            "alert_email_addresses": {
                "value": ",".join(settings.alert_email_addresses),
                "description": "Addresses subscribed to the budget alerts topic"
            },
        }
