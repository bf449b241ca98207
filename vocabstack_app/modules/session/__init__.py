module_metadata = {
    'name': 'Study Sessions',
    'category': 'Learning',
    'enabled': True
}


def setup_module(app):
    """Map the session tables; tests and review states are mapped by their own modules."""
    from . import models  # noqa: F401
