"""
Layout feature.

Word wrapping and pagination of structured documents (employment contracts)
into width-constrained, height-bounded pages ready for a document writer.
"""
