"""
Post 业务逻辑服务

提供 Post 的查找、创建、修改与删除，是翻译工作流访问文章数据的唯一入口。
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from post_translator.exceptions import ItemNotFound
from post_translator.models import Post


class PostService:
    """Post 业务逻辑服务"""

    def __init__(self, db: Session):
        self.db = db

    def find(self, post_id: Optional[int]) -> Post:
        """
        按 ID 查找 Post

        Args:
            post_id: Post 主键

        Returns:
            Post: 文章对象

        Raises:
            ItemNotFound: 文章不存在（或 post_id 为 None）
        """
        post = self.db.get(Post, post_id) if post_id is not None else None
        if post is None:
            raise ItemNotFound(post_id)
        return post

    def create(self, title: str, description: str = "") -> Post:
        """
        创建 Post（仅 flush，由调用方提交事务）

        Args:
            title: 源语言标题
            description: 源语言正文

        Returns:
            Post: 新建的文章（已分配 id）
        """
        post = Post(title=title, description=description)
        self.db.add(post)
        self.db.flush()
        return post

    def list(self, offset: int = 0, limit: int = 20) -> List[Post]:
        """按创建时间倒序分页列出 Post"""
        return list(self.db.execute(
            select(Post).order_by(Post.created_at.desc(), Post.id.desc()).offset(offset).limit(limit)
        ).scalars())

    def update(self, post_id: int, title: Optional[str] = None, description: Optional[str] = None) -> Post:
        """
        修改源语言内容（仅 flush）

        已存储的译文保持不变，需要新译文时由调用方重新提交。

        Raises:
            ItemNotFound: 文章不存在
        """
        post = self.find(post_id)
        if title is not None:
            post.title = title
        if description is not None:
            post.description = description
        self.db.flush()
        return post

    def delete(self, post_id: int) -> None:
        """
        删除 Post 及其译文（仅 flush）

        关联的翻译任务保留，post_id 被置为 NULL；之后到达的结果会以
        ItemNotFound 结束。

        Raises:
            ItemNotFound: 文章不存在
        """
        post = self.find(post_id)
        self.db.delete(post)
        self.db.flush()
