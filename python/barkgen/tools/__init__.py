"""Command-line tools: ``python -m barkgen.tools.render_bark`` and ``python -m barkgen.tools.validate_texture``."""
