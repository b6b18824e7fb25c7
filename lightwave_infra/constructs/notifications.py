"""
Notifications Construct for LightWave Infrastructure
Manages the budget alert topic, its subscriptions and the cost dashboard
"""
from typing import Dict, Set
from aws_cdk import (
    aws_cloudwatch as cloudwatch,
    aws_iam as iam,
    aws_sns as sns,
    aws_sns_subscriptions as sns_subs,
    Duration,
)
from constructs import Construct

from ..settings import BUDGET_ALERTS_CHANNEL, BudgetSettings


class NotificationsConstruct(Construct):
    """Construct for budget alert delivery and cost visibility"""

    def __init__(self, scope: Construct, construct_id: str,
                 settings: BudgetSettings, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings
        self.environment_name = settings.environment_name
        self.topics: Dict[str, sns.Topic] = {}
        self.subscribed_emails: Dict[str, Set[str]] = {}

        self._create_sns_topics()
        self._allow_budgets_to_publish()

        for email in settings.alert_email_addresses:
            self.add_email_subscription(BUDGET_ALERTS_CHANNEL, email)

    def _create_sns_topics(self) -> None:
        """Create SNS topics for budget notifications"""
        self.topics[BUDGET_ALERTS_CHANNEL] = sns.Topic(
            self, "BudgetAlertsTopic",
            topic_name=f"lightwave-{self.environment_name}-budget-alerts",
            display_name="LightWave Budget Alerts"
        )

    def _allow_budgets_to_publish(self) -> None:
        """AWS Budgets needs an explicit topic policy to deliver SNS notifications"""
        for topic in self.topics.values():
            topic.add_to_resource_policy(
                iam.PolicyStatement(
                    sid="AllowBudgetsPublish",
                    effect=iam.Effect.ALLOW,
                    principals=[iam.ServicePrincipal("budgets.amazonaws.com")],
                    actions=["SNS:Publish"],
                    resources=[topic.topic_arn]
                )
            )

    def _get_topic(self, channel: str) -> sns.Topic:
        if channel not in self.topics:
            known = ", ".join(sorted(self.topics))
            raise KeyError(f"Notification channel '{channel}' not found (known: {known})")
        return self.topics[channel]

    def topic_arn(self, channel: str) -> str:
        """Resolve a notification channel reference to its topic ARN"""
        return self._get_topic(channel).topic_arn

    def add_email_subscription(self, topic_name: str, email: str) -> None:
        """Add email subscription to SNS topic, once per address"""
        topic = self._get_topic(topic_name)
        subscribed = self.subscribed_emails.setdefault(topic_name, set())
        if email in subscribed:
            return
        topic.add_subscription(sns_subs.EmailSubscription(email))
        subscribed.add(email)

    def create_cost_dashboard(self) -> cloudwatch.Dashboard:
        """Create the cost dashboard with one annotation per alert threshold"""
        settings = self.settings

        # Billing metrics are only published in us-east-1
        estimated_charges = cloudwatch.Metric(
            namespace="AWS/Billing",
            metric_name="EstimatedCharges",
            dimensions_map={"Currency": "USD"},
            statistic="Maximum",
            period=Duration.hours(6),
            region="us-east-1",
            label="Estimated month-to-date charges"
        )

        self.threshold_annotations = [
            cloudwatch.HorizontalAnnotation(
                value=settings.threshold_amount(rule),
                label=f"{rule.threshold_percentage:g}% {rule.threshold_type.value.lower()}",
                color=cloudwatch.Color.RED if rule.threshold_percentage >= 100 else cloudwatch.Color.ORANGE
            )
            for rule in settings.notification_thresholds
        ]

        self.dashboard = cloudwatch.Dashboard(
            self, "CostDashboard",
            dashboard_name=f"lightwave-{self.environment_name}-cost"
        )

        self.dashboard.add_widgets(
            cloudwatch.TextWidget(
                markdown=(
                    f"# LightWave Costs - {self.environment_name.upper()}\n\n"
                    f"Monthly budget: ${settings.monthly_budget_limit:,.2f} USD"
                ),
                width=24,
                height=2
            )
        )

        self.dashboard.add_widgets(
            cloudwatch.GraphWidget(
                title="Estimated Charges vs Budget Thresholds",
                left=[estimated_charges],
                left_annotations=self.threshold_annotations,
                width=24,
                height=8
            ),
            cloudwatch.SingleValueWidget(
                title="Estimated Charges (USD)",
                metrics=[estimated_charges],
                width=12,
                height=4
            )
        )

        return self.dashboard
