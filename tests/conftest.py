import httpx
import pytest

from movie_resolver.config import FetcherConfig
from movie_resolver.http_fetch import Fetcher


DETAIL_HTML = """
<html>
<head><title>
    阳光普照 (豆瓣)
</title></head>
<body>
<h1>
    <span property="v:itemreviewed">阳光普照</span>
    <span class="year">(2019)</span>
</h1>
<div id="mainpic" class="">
  <a class="nbgnbg" href="https://movie.douban.com/subject/30329536/photos?type=R" title="点击看更多海报">
    <img src="https://img9.doubanio.com/view/photo/s_ratio_poster/public/p2570243317.webp?v=1" title="点击看更多海报" alt="阳光普照" rel="v:image" />
  </a>
</div>
<div id="info">
  <span class="actor"><span class='pl'>主演</span>: <span class='attrs'><a href="/celebrity/1/" rel="v:starring">陈以文</a> / <a href="/celebrity/2/" rel="v:starring">柯淑勤</a> / <a href="/celebrity/3/" rel="v:starring">许光汉</a></span></span><br/>
  <span class="pl">类型:</span> <span property="v:genre">剧情</span> / <span property="v:genre">家庭</span><br/>
</div>
<div class="rating_self clearfix" typeof="v:Rating">
  <strong class="ll rating_num" property="v:average">8.9</strong>
</div>
<div class="indent" id="link-report-intra">
  <span property="v:summary" class="">
        阿豪（许光汉 饰）是个品学兼优的好学生，
        弟弟阿和（巫建和 饰）却是个让人头疼的问题少年。
  </span>
</div>
</body>
</html>
"""


def make_fetcher(handler, **config) -> Fetcher:
    """Fetcher wired to an in-memory transport; back-off sleeps are recorded, not slept."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    fetcher = Fetcher(FetcherConfig(**config), client=client, sleep=lambda s: fetcher.sleeps.append(s))
    fetcher.sleeps = []
    return fetcher


@pytest.fixture
def detail_html() -> str:
    return DETAIL_HTML
