module_metadata = {
    'name': 'Due Cards',
    'category': 'Core',
    'enabled': True
}


def setup_module(app):
    """Read-only module; depends on the review module's ReviewState mapping."""
    from vocabstack_app.modules.review import models  # noqa: F401
