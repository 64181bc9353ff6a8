import sys

from app.core.security import create_access_token


# 本地联调用：签发一个 Bearer Token
# python -m scripts.issue_token alice 60
# （确保 PYTHONPATH 指向 app 上级目录，即 backend/）

def main():
    subject = sys.argv[1] if len(sys.argv) > 1 else "local-dev"
    minutes = int(sys.argv[2]) if len(sys.argv) > 2 else None
    token = create_access_token({"sub": subject}, expires_minutes=minutes)
    print(f"Authorization: Bearer {token}")

if __name__ == "__main__":
    main()
