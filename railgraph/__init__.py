"""railgraph: render application models, controllers and state machines as DOT."""

APP_HUMAN_NAME = "railgraph"
APP_URL = "https://github.com/railgraph/railgraph"

__version__ = "0.4.0"
