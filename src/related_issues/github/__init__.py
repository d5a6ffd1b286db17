"""GitHub side of the action: pull request access and description rendering.

The managed part of a pull request description looks like:
  - a start marker comment
  - a heading
  - an Issue | Title (| Scopes) table
  - an end marker comment
"""
