module_metadata = {
    'name': 'Review Scheduler',
    'category': 'Core',
    'enabled': True
}


def setup_module(app):
    """Map the ReviewState model and install the counter backstop."""
    from . import models  # noqa: F401
    from . import events  # noqa: F401
