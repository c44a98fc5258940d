#!/usr/bin/env python3
"""
启动脚本 - 用于在开发环境中启动字幕服务
"""

import os
import sys

# 添加项目根目录到路径
sys.path.insert(0, os.path.dirname(__file__))

from ytdlp_subtitles.main import create_app

if __name__ == '__main__':
    print("正在启动 yt-dlp 字幕服务...")

    try:
        app = create_app(os.getenv('YTDLP_SUBTITLES_CONFIG'))
        print("✅ 应用创建成功")

        print("🚀 启动Flask开发服务器...")
        print("   应用地址: http://localhost:5000")
        print("   健康检查: http://localhost:5000/health")
        print("   API信息: http://localhost:5000/api/info")
        print("   按 Ctrl+C 停止服务器")
        print("-" * 50)

        app.run(
            host='127.0.0.1',
            port=5000,
            debug=True,
            threaded=True
        )

    except KeyboardInterrupt:
        print("\n👋 应用已停止")
    except Exception as e:
        print(f"❌ 应用启动失败: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
