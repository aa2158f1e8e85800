"""
Idea submissions: users propose, admins review (pending -> approved/rejected).
"""
