#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Builder implementations for Android platform projects.
"""

from .project_builder import ProjectBuilder

__all__ = ['ProjectBuilder']
