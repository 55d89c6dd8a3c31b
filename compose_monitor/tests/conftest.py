import pytest

from compose_monitor.engine import ContainerEngine


def container(cid, name, image="nginx:latest", status="Up 2 seconds"):
    return {"Id": cid, "Image": image, "Names": [f"/{name}"], "Status": status}


class FakeDockerAPI:
    """
    Stands in for docker.APIClient. Each call to containers() pops the next
    scripted response; an exception instance is raised instead of returned.
    Once the script runs out the last response repeats.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    def containers(self, all=False):
        index = min(self.calls, len(self.responses) - 1)
        self.calls += 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def make_engine():
    def _make(*responses):
        api = FakeDockerAPI(responses)
        return ContainerEngine(api), api

    return _make


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def write_manifest(tmp_path):
    def _write(text, name="docker-compose.yml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def make_container():
    return container
