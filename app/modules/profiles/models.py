# Profile fan-out
# No tables of its own: a user's display name and photo are copied into the
# members array of every group they belong to (see groups/models.py), and this
# module keeps those copies current after a profile edit.

"""
Each edit scans all active groups, finds the user's member row by user_id,
and rewrites that group's whole members array with sanitized records
(optional bio/photo_url keys omitted when empty). Groups without the user are
not written. Cost is O(active groups) per edit.
"""
