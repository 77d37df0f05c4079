"""Document generation engine.

Modules:
- fallbacks: Default texts for phases and tools
- models: Validated template records and overlays
- overlays: Built-in overlays and registry
- resolver: Merged per-template view
- sections: The eight section builders
- assembler: Multi-template block sequence
- docx_writer, html_writer, flat_export: Serializers
- exporter: Export coordinator
"""

__all__ = [
    "fallbacks",
    "models",
    "overlays",
    "resolver",
    "sections",
    "assembler",
    "docx_writer",
    "html_writer",
    "flat_export",
    "exporter",
]
