import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
package_root = os.path.abspath(os.path.dirname(__file__))
project_root = str(Path(package_root).parent)
env_file = os.path.join(project_root, '.env')
if os.path.exists(env_file):
    load_dotenv(env_file)

__version__ = "0.1.0"
