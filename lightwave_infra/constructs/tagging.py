"""
Tagging Framework for LightWave Infrastructure
Applies the budget settings' tag mapping using CDK Aspects
"""
from typing import Dict
import jsii
from aws_cdk import (
    Aspects,
    AspectPriority,
    IAspect,
    CfnResource,
    TagManager,
)
from constructs import Construct, IConstruct


# Resources tagged through their own properties rather than the tag manager
SELF_TAGGED_RESOURCE_TYPES = frozenset({
    "AWS::Budgets::Budget",
})


@jsii.implements(IAspect)
class UnifiedTaggingAspect:
    """CDK Aspect that applies the shared tags plus per-resource-type tags"""

    def __init__(self, tags: Dict[str, str]):
        self.required_tags = dict(tags)

        self.resource_type_tags = {
            "AWS::SNS::Topic": {
                "DataClassification": "internal",
                "NotificationLevel": "budget"
            },
            "AWS::SSM::Parameter": {
                "DataClassification": "internal"
            },
        }

    def visit(self, node: IConstruct) -> None:
        """Visit each construct and apply all tags in one pass"""
        # Only CloudFormation resources; Tags.of().add() would register more aspects
        if not isinstance(node, CfnResource):
            return

        resource_type = node.cfn_resource_type
        if resource_type in SELF_TAGGED_RESOURCE_TYPES:
            return

        all_tags = dict(self.required_tags)
        all_tags.update(self.resource_type_tags.get(resource_type, {}))
        self._apply_cfn_tags(node, all_tags)

    def _apply_cfn_tags(self, cfn_resource: CfnResource, tags: Dict[str, str]) -> None:
        """Apply tags at the CloudFormation resource level"""
        if TagManager.is_taggable(cfn_resource):
            tag_manager = cfn_resource.tags
        elif TagManager.is_taggable_v2(cfn_resource):
            tag_manager = cfn_resource.cdk_tag_manager
        else:
            # Dashboards, topic policies and subscriptions carry no tags
            return
        for tag_key, tag_value in tags.items():
            tag_manager.set_tag(tag_key, tag_value)


class TaggingFramework(Construct):
    """Centralized tagging framework that applies the tagging aspect to its scope"""

    def __init__(self, scope: Construct, construct_id: str,
                 tags: Dict[str, str], **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.tags = dict(tags)

        # MUTATING priority matches Tags.of().add() and avoids priority conflicts
        Aspects.of(scope).add(
            UnifiedTaggingAspect(self.tags),
            priority=AspectPriority.MUTATING
        )
