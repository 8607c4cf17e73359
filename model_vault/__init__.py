"""
model-vault: acquire GGUF model artifacts over HTTP and keep a local catalog of them.
"""

__version__ = "0.3.0"
