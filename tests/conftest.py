import os
import tempfile
import threading
from pathlib import Path

# Keep test log files out of the working tree; must run before src is imported
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "document-triage-test-logs"))

import pytest

from src.memory.run_log import RunLog
from src.models.gateway_schema import ClassificationOutput
from src.tools.action_dispatcher import SimulatedActionDispatcher


class ScriptedGateway:
    """Inference gateway stand-in that replays canned answers per output model"""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def script(self, output_model, *responses):
        self.responses.setdefault(output_model, []).extend(responses)
        return self

    def invoke(self, prompt, variables, output_model):
        # Formatting proves the prompt placeholders match the agent's variables
        prompt.format_messages(**variables, output_schema="{}")
        self.calls.append((output_model, variables))

        queue = self.responses.get(output_model)
        if not queue:
            raise AssertionError(f"No scripted response for {output_model.__name__}")

        response = queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return output_model.model_validate(response)

    def called_with(self, output_model):
        return [variables for model, variables in self.calls if model is output_model]


class SlowClassifierGateway(ScriptedGateway):
    """Holds the classifier call open until released"""

    def __init__(self):
        super().__init__()
        self.classifying = threading.Event()
        self.release = threading.Event()

    def invoke(self, prompt, variables, output_model):
        if output_model is ClassificationOutput:
            self.classifying.set()
            self.release.wait(timeout=5)
        return super().invoke(prompt, variables, output_model)


@pytest.fixture
def gateway():
    return ScriptedGateway()


@pytest.fixture
def slow_gateway():
    gateway = SlowClassifierGateway()
    yield gateway
    gateway.release.set()


class RecordingDispatcher(SimulatedActionDispatcher):
    """Simulated dispatcher that also remembers every call"""

    def __init__(self):
        self.sent = []

    def send(self, endpoint, payload):
        self.sent.append((endpoint, payload))
        return super().send(endpoint, payload)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def run_log():
    return RunLog()


@pytest.fixture
def workflow(gateway, dispatcher, run_log):
    from src.graph.workflow import DocumentRoutingWorkflow

    return DocumentRoutingWorkflow(gateway=gateway, dispatcher=dispatcher, run_log=run_log)
