"""
Signature feature.

Text signatures placed on the pages of an opened PDF: annotation overlay with
pointer state machine, canvas/document coordinate transform, hit testing and
cancellable page rendering.
"""
