import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from unittest.mock import patch

from aws_cdk.assertions import Template

from app import LandingZoneApp

# Placeholder for CloudFormation intrinsics, other than Fn::GetAtt and Ref, found inside a JSON-encoded custom
# resource property
TOKEN = 'TOKEN'


def _join_intrinsic(value) -> str:
    """Render an intrinsic as text: `<logical id>.<attribute>` for Fn::GetAtt and `Ref:<logical id>` for Ref"""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        if 'Fn::Join' in value:
            delimiter, parts = value['Fn::Join']
            return delimiter.join(_join_intrinsic(part) for part in parts)
        if 'Fn::GetAtt' in value:
            logical_id, attribute = value['Fn::GetAtt']
            return f'{logical_id}.{attribute}'
        if 'Ref' in value:
            return f'Ref:{value["Ref"]}'
    return TOKEN


def sdk_calls(template: Template, event: str = 'Create') -> list[dict]:
    """
    The AWS SDK calls made by every AwsCustomResource in a template, for one lifecycle event.

    AwsCustomResource stores each call as a JSON string, joined with any CloudFormation intrinsics it references.
    Those intrinsics are rendered as text (see `_join_intrinsic`) so the call can be decoded.
    """
    calls = []
    for resource in template.find_resources('Custom::AWS').values():
        call = resource['Properties'].get(event)
        if call is not None:
            calls.append(json.loads(_join_intrinsic(call)))
    return calls


def find_sdk_call(template: Template, expected: Mapping, event: str = 'Create') -> dict | None:
    """The first SDK call for the event that contains everything in `expected`"""
    return next((call for call in sdk_calls(template, event) if is_subset(expected, call)), None)


def is_subset(expected: Mapping, actual: Mapping) -> bool:
    for key, value in expected.items():
        if key not in actual:
            return False
        if isinstance(value, Mapping):
            if not isinstance(actual[key], Mapping) or not is_subset(value, actual[key]):
                return False
        elif actual[key] != value:
            return False
    return True


class _AppSynthesizer:
    """
    A helper class to cache apps based on context.
    This is useful to avoid re-synthesizing the app for each test.
    """

    def __init__(self):
        super().__init__()
        self._cached_apps: dict[str, LandingZoneApp] = {}

    def get_app(self, context: Mapping) -> LandingZoneApp:
        context_hash = self._get_context_hash(context)
        if context_hash not in self._cached_apps.keys():
            self._cached_apps[context_hash] = LandingZoneApp(context=context)
        return self._cached_apps[context_hash]

    def _get_context_hash(self, context: Mapping) -> str:
        return hash(json.dumps(context, sort_keys=True))


_app_synthesizer = _AppSynthesizer()


class TstAppABC(ABC):
    """
    Base class for common test elements across configurations.

    Note: Concrete classes must also inherit from TestCase
    """

    @classmethod
    @abstractmethod
    def get_context(cls) -> Mapping:
        pass

    @classmethod
    @patch.dict(os.environ, {'CDK_DEFAULT_ACCOUNT': '000000000000', 'CDK_DEFAULT_REGION': 'us-east-1'})
    def setUpClass(cls):  # pylint: disable=invalid-name
        """
        We build the app once per TestCase, to save compute time in the test suite
        """
        cls.context = cls.get_context()
        cls.app = _app_synthesizer.get_app(cls.context)
