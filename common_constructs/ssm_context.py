import json

from aws_cdk.aws_ssm import IStringParameter, StringParameter
from constructs import Construct


class SSMContext:
    """
    Context values that live in an SSM Parameter (as a JSON string) rather than in the repository.

    Values that are specific to a deployment, like the source repository and code connection, are kept out of
    git and looked up at synth time. During CDK's first synth pass, the lookup returns a dummy value, in which case
    we read the `ssm_context` key of a local example file so synthesis can complete and CDK can resolve the real
    value for its second pass.

    :param scope: The CDK construct scope
    :param construct_id: The ID for the StringParameter construct
    :param parameter_name: The name of the SSM Parameter to look up
    :param fallback_context_file: Path to the context file to use when dummy values are detected
    :param required_keys: Keys that must be present in the resolved context
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        parameter_name: str,
        fallback_context_file: str,
        required_keys: tuple[str, ...] = (),
    ):
        self._parameter = StringParameter.from_string_parameter_name(
            scope,
            construct_id,
            string_parameter_name=parameter_name,
        )
        value = StringParameter.value_from_lookup(scope, parameter_name)
        if value != f'dummy-value-for-{parameter_name}':
            self._context = json.loads(value)
        else:
            with open(fallback_context_file) as f:
                self._context = json.load(f)['ssm_context']

        missing_keys = [key for key in required_keys if key not in self._context]
        if missing_keys:
            raise ValueError(f"SSM context '{parameter_name}' is missing required keys: {', '.join(missing_keys)}")

    @property
    def parameter(self) -> IStringParameter:
        return self._parameter

    @property
    def context(self) -> dict:
        return self._context
