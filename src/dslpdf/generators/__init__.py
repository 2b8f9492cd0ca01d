"""Drawing layer: canvas surface, fonts, page templates and element renderers."""
