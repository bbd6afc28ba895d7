import os

# Must be set before paygate.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_paygate.db")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "whsec_test")
os.environ.setdefault("JWT_SECRET", "jwt_test_secret")
