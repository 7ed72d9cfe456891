"""
Lezec Diary - export a lezec.cz climbing diary to JSON.

Architecture:
- core/: Stable foundation (models, HTTP session client, normalizers, retry policy)
- parsers/: Page parsers (diary listing, route detail)
- config/: YAML + environment settings
- orchestrator.py: Login -> fetch -> window -> enrich pipeline
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
