"""editserver -- HTTP bridge to a local text editor.

Accepts content in a POST body, lets an external editor program change
it through a temporary file, and answers with the edited content. Meant
as the server half of "edit in external editor" browser extensions.
"""

__version__ = "0.1.0"
