TEMPLATES_URL = "/api/v1/admin/templates"
INVITATIONS_URL = "/api/v1/admin/invitations"
INVITATION_URL = "/api/v1/admin/invitations/{invitation_id}"
PUBLISH_INVITATION_URL = "/api/v1/admin/invitations/{invitation_id}/publish"
UNPUBLISH_INVITATION_URL = "/api/v1/admin/invitations/{invitation_id}/unpublish"
PUBLIC_INVITATION_URL = "/api/v1/invitations/{slug}"
