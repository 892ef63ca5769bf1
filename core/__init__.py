"""
Core business logic modules for YouTube Content Optimizer

This package contains the core functionality modules:
- prompt.py: video script → optimization prompt
- generate.py: prompt → generated Markdown response
- sections.py: Markdown response → titled sections
- validate.py: sections → checklist and metadata verdicts
- export.py: result → Markdown and metadata.json files
"""
