"""
VClass: A Virtual Classroom Management Registry

An in-memory administrative registry for classrooms, enrolled students and
scheduled assignments, driven by a line-oriented command interpreter and an
optional REST surface.
"""

__version__ = "1.0.0"
__author__ = "VClass Development Team"
__description__ = "Virtual Classroom Management Registry"
