"""
Use Cases

Organized into domain folders:
- invites/: Invite create, reissue, revoke and bulk actions
- rsvp/: Authenticated and public RSVP submission
- checkins/: Check-in recording, QR scan and listing
- incidents/: Delivery failure overview, retries and invite timelines
- events/: Event create/update and change history
"""
