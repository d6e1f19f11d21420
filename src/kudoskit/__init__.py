"""kudoskit - turns work activity from collaboration tools into recognition.

Importing the package configures logging so every module can obtain its
logger through ``LogManager.get_instance()``.
"""

from kudoskit.log_config import log_manager

__version__ = "0.1.0"

__all__ = ["log_manager", "__version__"]
