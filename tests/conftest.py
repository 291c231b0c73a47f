import os
import tempfile

# Keep test runs from writing log files into the user's home directory.
os.environ.setdefault("IBUILD_LOG_DIR", tempfile.mkdtemp(prefix="ibuild-logs-"))
