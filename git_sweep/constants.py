# The trunk branch is never offered for deletion.
TRUNK_BRANCH = "master"

# Number of leading characters of the commit hash shown in the prompt.
DISPLAYED_HASH_LENGTH = 10

COMMIT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
