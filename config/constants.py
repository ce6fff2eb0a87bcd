"""Constants used across the application."""

# Columns of the users table that the profile endpoints read and write
PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_picture")

# Fields the editor form saves; the picture changes only through an upload
EDITABLE_PROFILE_FIELDS = ("email", "first_name", "last_name")

# Choices offered by the editor's platform dropdown ("" = nothing selected)
PLATFORM_OPTIONS = [
    "",
    "Phone number",
    "Personal website",
    "Linkedin",
    "Instagram",
    "Facebook",
    "Twitter",
    "Github",
]

# Multipart field carrying an uploaded profile picture
UPLOAD_FIELD = "file"

# Response messages
MSG_PROFILE_UPDATED = "User profile updated"
MSG_PLATFORMS_UPDATED = "User platforms updated"
MSG_PICTURE_UPLOADED = "Profile picture uploaded"
MSG_NO_FILE = "No file uploaded"
MSG_DUPLICATE_PLATFORM = "Error: Cannot save duplicate entries of the same platform."
