"""ReelChat AI functions: video Q&A chat with optional voice questions."""
