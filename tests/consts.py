TEST_BUCKET_NAME = "test-uploads-bucket"
TEST_REGION = "us-east-1"
