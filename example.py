import logging
import typing

from entity_hydrator import Entity, Hydrator, Identity, children
from entity_hydrator.storages.sqlalchemy import SqlAlchemyRepository, create_session_factory, map_aggregate
from entity_hydrator.storages.sqlalchemy.registry import SaRegistry


logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")


class Comment(Entity):
    id: Identity[int] = 0
    parent_id: int = 0
    article_id: int = 0
    message: str = ""


class Article(Entity):
    id: Identity[int] = 0
    parent_id: int = 0
    title: str = ""
    comments: typing.List[Comment] = children(back_reference="article_id")


registry = SaRegistry()
map_aggregate(registry, Article)
Session = create_session_factory(registry)

with Session() as session:
    repo = SqlAlchemyRepository(session)
    hydrator = Hydrator(registry, repo)

    article = hydrator.hydrate(
        Article,
        '{"parentId": 12, "title": "title1", "comments": [{"parentId": 23, "message": "str1"}, {"message": "str2"}]}',
    )
    repo.save(article)
    repo.flush()
    repo.refresh(article)

    article = hydrator.hydrate(Article, '{"title": "title2", "comments": [{"id": 2, "message": "str3"}]}', article.id)
    article = hydrator.hydrate(Article, '{"comments": [{"message": "str4"}]}', article.id)
    repo.flush()
    repo.refresh(article)

    assert article.title == "title2"
    assert [comment.message for comment in article.comments] == ["str1", "str3", "str4"], article.comments
    session.commit()
