"""Taskmaster - personal task manager with recurring-task scheduling."""
