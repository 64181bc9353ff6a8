from app.db import create_all


# 只在空的开发库上运行一次：python -m scripts.create_tables
# 生产库的表结构不归本服务管理

def main():
    create_all()
    print("Tables created: sku_details, component_details, period")

if __name__ == "__main__":
    main()
