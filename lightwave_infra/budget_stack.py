"""
LightWave Budget Stack
Orchestrates the cost budget, its notifications and the cost dashboard
"""
from typing import Optional
from aws_cdk import Stack
from constructs import Construct

from .settings import BUDGET_ALERTS_CHANNEL, BudgetSettings, get_budget_settings
from .constructs.tagging import TaggingFramework
from .constructs.notifications import NotificationsConstruct
from .constructs.configuration import ConfigurationConstruct
from .constructs.budget import BudgetConstruct


class BudgetStack(Stack):
    """Main stack declaring the monthly budget for one environment"""

    def __init__(self, scope: Construct, construct_id: str,
                 environment_name: str = "prod",
                 settings: Optional[BudgetSettings] = None,
                 ops_email: Optional[str] = None,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or get_budget_settings(environment_name)
        self.environment_name = self.settings.environment_name

        # Tagging first so the aspect covers every resource below
        self.tagging_framework = TaggingFramework(
            self, "TaggingFramework",
            tags=self.settings.tags
        )

        self.notifications = NotificationsConstruct(
            self, "Notifications",
            settings=self.settings
        )

        self.configuration = ConfigurationConstruct(
            self, "Configuration",
            settings=self.settings
        )

        self.budget = BudgetConstruct(
            self, "Budget",
            settings=self.settings,
            channel_resolver=self.notifications.topic_arn
        )

        self.cost_dashboard = self.notifications.create_cost_dashboard()

        if ops_email:
            self.notifications.add_email_subscription(BUDGET_ALERTS_CHANNEL, ops_email)
