"""Session services."""
from dgp.services.session_controller import SessionController
from dgp.services.session_registry import SessionRegistry, get_session_registry, reset_session_registry
