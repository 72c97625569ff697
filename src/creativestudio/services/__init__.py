"""Generation, transport and bookkeeping services for creativestudio."""
