module_metadata = {
    'name': 'Progress',
    'category': 'Learning',
    'enabled': True
}


def setup_module(app):
    """Map daily aggregates and connect the learning signal receivers."""
    from . import models  # noqa: F401
    from . import events  # noqa: F401
