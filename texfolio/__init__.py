"""
TexFolio - structured resumes typeset with LaTeX

A resume-building backend that stores structured resume documents, renders them to
PDF through a LaTeX pipeline, and calls AI services for content feedback.

Architecture:
- Resumes Context: Resume documents, persistence collaborator, service and analytics
- Templating Context: Text sanitization, placeholder mapping, LaTeX templates
- Rendering Context: Template merge, PDF compilation and temporary file lifecycle
- Coaching Context: AI feedback and content generation
"""

__version__ = "0.1.0"
