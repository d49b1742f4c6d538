# Supabase Storage buckets: profile-media, post-media, group-media
# This file documents the expected storage layout
# Actual operations are handled via Supabase SDK (or S3) in service.py

"""
Expected Supabase Storage layout (public buckets):

profile-media:
- avatars/<user_id>/<timestamp>.<ext>   (images, max 2 MiB)
- covers/<user_id>/<timestamp>.<ext>    (images, max 5 MiB)

post-media:
- <user_id>/<timestamp>.<ext>           (images, videos, documents, max 10 MiB)

group-media:
- <user_id>/group-covers/<timestamp>.<ext>  (images, max 5 MiB)

Storage policies only allow a user to write under their own <user_id> folder.
When S3 is configured the same keys are used under the configured bucket,
prefixed with the Supabase bucket name.
"""
