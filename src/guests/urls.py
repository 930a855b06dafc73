GUESTS_URL = "/api/v1/admin/invitations/{invitation_id}/guests"
GUEST_URL = "/api/v1/admin/guests/{guest_id}"
RSVP_URL = "/api/v1/rsvp/{guest_id}"
