import os

pytest_plugins = ["solarclock.utils.testing.fixtures"]

# Pin the local timezone so mocked solar times are stable across machines
os.environ.setdefault("TIMEZONE", "America/New_York")
