"""Notes generation backend: streams AI-generated Markdown notes to clients."""
