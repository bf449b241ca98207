module_metadata = {
    'name': 'Assessment',
    'category': 'Learning',
    'enabled': True
}


def setup_module(app):
    """Map the test tables."""
    from . import models  # noqa: F401
