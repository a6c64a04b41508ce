"""Tests for SAM template validation.

These tests validate the SAM template structure before deployment,
catching configuration errors early in the development cycle.
"""

import yaml
import pytest
from pathlib import Path


# Custom YAML loader that handles CloudFormation intrinsic functions
class CloudFormationLoader(yaml.SafeLoader):
    """YAML loader that understands CloudFormation intrinsic functions."""


def _cfn_constructor(loader, node):
    """Convert CloudFormation intrinsic functions to dicts."""
    tag = node.tag[1:]  # Remove the leading '!'
    if isinstance(node, yaml.ScalarNode):
        return {tag: loader.construct_scalar(node)}
    elif isinstance(node, yaml.SequenceNode):
        return {tag: loader.construct_sequence(node)}
    elif isinstance(node, yaml.MappingNode):
        return {tag: loader.construct_mapping(node)}


# Register CloudFormation tags
for tag in ["Ref", "Sub", "GetAtt", "If", "Equals", "And", "Or", "Not"]:
    CloudFormationLoader.add_constructor(f"!{tag}", _cfn_constructor)


PAGE_FUNCTIONS = {
    "KnowledgePageFunction": ("huangshan_edge.handler.knowledge_handler", "/knowledge/{slug}"),
    "NewsPageFunction": ("huangshan_edge.handler.news_handler", "/news/{slug}"),
}


@pytest.fixture
def sam_template():
    """Load and parse the SAM template."""
    template_path = Path(__file__).parent.parent.parent / "template.yaml"
    with open(template_path) as f:
        return yaml.load(f, Loader=CloudFormationLoader)


@pytest.fixture
def function_globals(sam_template):
    return sam_template["Globals"]["Function"]


class TestSAMTemplateStructure:
    """Tests for basic SAM template structure."""

    def test_template_has_aws_version(self, sam_template):
        assert sam_template["AWSTemplateFormatVersion"] == "2010-09-09"

    def test_template_has_sam_transform(self, sam_template):
        assert sam_template["Transform"] == "AWS::Serverless-2016-10-31"

    @pytest.mark.parametrize("name", PAGE_FUNCTIONS)
    def test_page_functions_exist(self, sam_template, name):
        func = sam_template["Resources"][name]
        assert func["Type"] == "AWS::Serverless::Function"

    def test_http_api_exists(self, sam_template):
        assert sam_template["Resources"]["PagesApi"]["Type"] == "AWS::Serverless::HttpApi"


class TestLambdaConfiguration:
    """Tests for Lambda function configuration."""

    def test_runtime_is_python313(self, function_globals):
        assert function_globals["Runtime"] == "python3.13"

    @pytest.mark.parametrize(("name", "expected"), PAGE_FUNCTIONS.items())
    def test_handler_path_correct(self, sam_template, name, expected):
        props = sam_template["Resources"][name]["Properties"]
        assert props["Handler"] == expected[0]

    def test_timeout_exceeds_upstream_timeout(self, function_globals):
        """The function must outlive the 10 s content API timeout to answer 503."""
        timeout = float(function_globals["Environment"]["Variables"]["REQUEST_TIMEOUT"])
        assert function_globals["Timeout"] > timeout

    def test_memory_is_adequate(self, function_globals):
        assert function_globals["MemorySize"] == 256

    def test_code_uri_points_to_src(self, function_globals):
        assert function_globals["CodeUri"] == "src/"


class TestRoutes:
    @pytest.mark.parametrize(("name", "expected"), PAGE_FUNCTIONS.items())
    def test_function_serves_its_route(self, sam_template, name, expected):
        events = sam_template["Resources"][name]["Properties"]["Events"]
        (event,) = events.values()

        assert event["Type"] == "HttpApi"
        assert event["Properties"]["Path"] == expected[1]
        assert event["Properties"]["Method"] == "GET"
        assert event["Properties"]["ApiId"] == {"Ref": "PagesApi"}


class TestEnvironmentVariables:
    """Tests for required environment variables."""

    @pytest.mark.parametrize(
        "name",
        ["NEXT_PUBLIC_API_URL", "SITE_URL", "REQUEST_TIMEOUT", "STATIC_ROUTES_BUCKET", "STATIC_ROUTES_KEY"],
    )
    def test_variable_configured(self, function_globals, name):
        assert name in function_globals["Environment"]["Variables"]

    def test_request_timeout_is_ten_seconds(self, function_globals):
        assert function_globals["Environment"]["Variables"]["REQUEST_TIMEOUT"] == "10"


class TestIAMPolicies:
    """Tests for IAM policy configuration (least-privilege)."""

    @pytest.mark.parametrize("name", PAGE_FUNCTIONS)
    def test_manifest_read_policy_exists(self, sam_template, name):
        policies = sam_template["Resources"][name]["Properties"]["Policies"]

        assert "s3:GetObject" in str(policies)

    @pytest.mark.parametrize("name", PAGE_FUNCTIONS)
    def test_no_write_permissions(self, sam_template, name):
        policies_str = str(sam_template["Resources"][name]["Properties"]["Policies"])

        assert "s3:PutObject" not in policies_str
        assert "s3:DeleteObject" not in policies_str

    @pytest.mark.parametrize("name", PAGE_FUNCTIONS)
    def test_no_wildcard_actions(self, sam_template, name):
        policies = sam_template["Resources"][name]["Properties"]["Policies"]

        for policy in policies:
            if isinstance(policy, dict) and "Statement" in policy:
                for statement in policy["Statement"]:
                    actions = statement.get("Action", [])
                    if isinstance(actions, str):
                        actions = [actions]
                    for action in actions:
                        assert action != "*", "Wildcard action not allowed"
                        assert not action.endswith(":*"), f"Overly broad action: {action}"

    @pytest.mark.parametrize("name", PAGE_FUNCTIONS)
    def test_resources_are_scoped(self, sam_template, name):
        policies = sam_template["Resources"][name]["Properties"]["Policies"]

        for policy in policies:
            if isinstance(policy, dict) and "Statement" in policy:
                for statement in policy["Statement"]:
                    resource = statement.get("Resource", "")
                    if isinstance(resource, dict):
                        resource = resource.get("Sub", "")
                    assert resource != "*", "Wildcard resource not allowed"
                    assert resource.endswith("/static-routes.json")


class TestParameters:
    """Tests for SAM template parameters."""

    def test_environment_has_allowed_values(self, sam_template):
        env_param = sam_template["Parameters"]["Environment"]
        assert "dev" in env_param["AllowedValues"]
        assert "prod" in env_param["AllowedValues"]

    def test_content_api_defaults_to_production_worker(self, sam_template):
        default = sam_template["Parameters"]["ContentApiUrl"]["Default"]
        assert default == "https://huangshan-api.xox-labs-server.workers.dev"

    def test_no_hardcoded_secrets(self, sam_template):
        template_str = yaml.dump(sam_template).lower()

        for pattern in ["api-key=", "password=", "secret="]:
            assert pattern not in template_str, f"Possible hardcoded secret: {pattern}"
