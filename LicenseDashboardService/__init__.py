"""
License Dashboard Service Django project.
"""
