"""sitewalker.crawler: Дерево страниц, модель страницы, загрузка, разбор ссылок и обход сайта."""
