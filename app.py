#!/usr/bin/env python3
"""
LightWave Budget CDK Application Entry Point
"""
import os
import aws_cdk as cdk

from lightwave_infra.budget_stack import BudgetStack


# Billing metrics and budgets live in us-east-1 unless CDK_DEFAULT_REGION says otherwise
environment_config = cdk.Environment(
    account=os.getenv('CDK_DEFAULT_ACCOUNT'),
    region=os.getenv('CDK_DEFAULT_REGION', 'us-east-1')
)

def main():
    """Synthesize the budget stack for BUDGET_ENVIRONMENT"""
    app = cdk.App()

    environment_name = os.getenv('BUDGET_ENVIRONMENT', 'prod')

    BudgetStack(
        app,
        f"LightwaveBudget-{environment_name}",
        environment_name=environment_name,
        ops_email=os.getenv('OPS_EMAIL'),
        env=environment_config,
        description=f"LightWave monthly cost budget and alerts ({environment_name})"
    )

    # Budget and topic tags come from the environment's BudgetSettings

    app.synth()


if __name__ == "__main__":
    main()
