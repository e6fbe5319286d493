from mangum import Mangum
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("LOYALTY_ROOT_PATH", "/api")

from loyalty.api import app  # noqa: E402
from loyalty.config import configure_logging  # noqa: E402

configure_logging()

handler = Mangum(app)
