"""Response channel: buffered and streamed delivery of invocation outcomes."""
