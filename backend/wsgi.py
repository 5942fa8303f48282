import pathlib
import sys

BACKEND = pathlib.Path(__file__).resolve().parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

from lineup_app import create_app

app = create_app()
