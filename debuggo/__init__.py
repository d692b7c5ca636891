"""DebugGo - retrieval-augmented error analysis."""
