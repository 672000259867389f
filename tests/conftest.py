import os
import tempfile

# Keep run logs out of the user's home while testing.
os.environ.setdefault("PABUILDER_LOG_DIR", tempfile.mkdtemp(prefix="pabuilder-logs-"))
