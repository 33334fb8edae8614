from .base_analyzer import BaseAnalyzer
from .js_analyzer import JavaScriptAnalyzer

__all__ = ["BaseAnalyzer", "JavaScriptAnalyzer"]
