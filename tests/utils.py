import os

from drawnumber.modules.base import BaseView


class FixedRandom:
    """Stands in for random.Random: draws the given secrets in order, then repeats the last."""

    def __init__(self, *secrets):
        self.secrets = list(secrets) or [0]
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        if len(self.secrets) > 1:
            return self.secrets.pop(0)
        return self.secrets[0]


class RecordingView(BaseView):
    name = "recorder"

    def __init__(self, name=None):
        super().__init__(name)
        self.events = []

    def start(self):
        self.events.append(("start",))

    def stop(self):
        self.events.append(("stop",))

    def number_incorrect(self):
        self.events.append(("number_incorrect",))

    def result(self, result):
        self.events.append(("result", result))

    def display_error(self, message):
        self.events.append(("error", message))

    def of_kind(self, kind):
        return [event for event in self.events if event[0] == kind]


def write_config(directory, text):
    path = os.path.join(directory, "config.yml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path
