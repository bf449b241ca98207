# File: vocabstack_app/modules/answer_check/__init__.py

module_metadata = {
    'name': 'Answer Check',
    'category': 'Core',
    'enabled': True
}


def setup_module(app):
    """Pure logic module; nothing to register beyond the metadata."""
    app.logger.debug("answer_check module ready")
